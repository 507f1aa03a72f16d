# -*- coding: utf-8 -*-
from lxml import etree

from compliance.settings import XSI_TYPE


def _parser():
    return etree.XMLParser(
        resolve_entities=False, no_network=True,
    )


def fromstring(xml):
    if not isinstance(xml, bytes):
        xml = xml.encode('utf-8')
    return etree.fromstring(xml, parser=_parser())


def local_name(node):
    return etree.QName(node).localname


def children(node, name):
    """
    Direct element children of `node` whose local name is `name`,
    in document order. Namespaces are ignored.
    """
    return [
        child for child in node.iterchildren()
        if isinstance(child.tag, str) and local_name(child) == name
    ]


def text(node):
    return ''.join(node.itertext())


def xsi_type(node):
    return node.get(XSI_TYPE)


def is_signed(node):
    return len(children(node, 'Signature')) > 0
