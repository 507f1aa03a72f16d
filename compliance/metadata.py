# -*- coding: utf-8 -*-
from collections import namedtuple

from compliance.crypto import normalize_x509
from compliance.utils import Slo

MetadataContext = namedtuple(
    'MetadataContext',
    ['entity_id', 'signing_certificate', 'single_logout_services'],
)


def _to_slo(service):
    if isinstance(service, Slo):
        return service
    if isinstance(service, dict):
        return Slo(service['binding'], service['location'])
    return Slo(*service)


def build_metadata_context(entity_id, signing_certificate, single_logout_services=()):
    """
    Build the read-only view of the identity provider metadata shared by
    every verifier of a session.

    Args:
        entity_id (str): Entity id the IdP asserts as <Issuer>.
        signing_certificate (str): The signing certificate, either PEM or
            the bare base64 body.
        single_logout_services (iterable): Slo tuples, (binding, location)
            pairs or dicts with 'binding' and 'location' keys.

    Returns:
        A MetadataContext instance.
    """
    return MetadataContext(
        entity_id,
        normalize_x509(signing_certificate) if signing_certificate else None,
        tuple(_to_slo(service) for service in single_logout_services),
    )
