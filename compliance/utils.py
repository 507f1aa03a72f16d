# -*- coding: utf-8 -*-
from collections import namedtuple

import lxml.etree as etree


def prettify_xml(msg):
    msg = etree.tostring(
        msg,
        pretty_print=True,
    )
    return msg.decode('utf-8')


Slo = namedtuple('SingleLogout', ['binding', 'location'])
