# -*- coding: utf-8 -*-
import json

import yaml
from voluptuous import ALLOW_EXTRA, All, In, Invalid, Length, Required, Schema, Url

from compliance.exceptions import BadConfiguration
from compliance.metadata import build_metadata_context
from compliance.session import Expectations
from compliance.settings import ACCUMULATE, BINDINGS, FAIL_FAST, RELAY_STATE_MAX_BYTES, VERIFICATION_MODES


class ConfigValidator(object):

    def __init__(self, confdata):
        self._confdata = confdata
        self._init_schema()
        self._init_custom_validators()

    def _init_schema(self):
        self._schema = {
            Required('idp'): {
                Required('entity_id'): str,
                Required('cert_file'): str,
                'single_logout_services': All(
                    [
                        {
                            Required('binding'): In(BINDINGS),
                            Required('location'): Url(),
                        }
                    ],
                    Length(min=0),
                ),
            },
            Required('sp'): {
                Required('entity_id'): str,
                Required('acs_url'): Url(),
            },
            'relay_state': str,
            'mode': All(str, In(VERIFICATION_MODES)),
        }

    def _init_custom_validators(self):
        def check_relay_state(data):
            relay_state = data.get('relay_state')
            if relay_state is not None and len(relay_state.encode('utf-8')) > RELAY_STATE_MAX_BYTES:
                raise Invalid(
                    'relay_state must not exceed {} bytes'.format(RELAY_STATE_MAX_BYTES))
            return data

        self._custom_validators = [
            check_relay_state,
        ]

    def validate(self):
        try:
            self._validate()
        except Invalid as e:
            self._fail(e)

    @staticmethod
    def _fail(exc):
        raise BadConfiguration(str(exc))

    def _validate(self):
        schema = Schema(
            All(self._schema, *self._custom_validators),
            extra=ALLOW_EXTRA,
        )
        schema(self._confdata)


class Config(object):

    def __init__(self, confdata):
        self._confdata = confdata
        self._idp_certificate = self._load_idp_certificate()

    def _load_idp_certificate(self):
        try:
            return self._read_file(self.idp_certificate_file_path)
        except (OSError, UnicodeDecodeError):
            self._fail('Unable to read the certificate file {}'.format(
                self.idp_certificate_file_path))

    @staticmethod
    def _read_file(path):
        with open(path, 'r') as fp:
            return fp.read()

    @staticmethod
    def _fail(message):
        raise BadConfiguration(message)

    @property
    def idp_certificate_file_path(self):
        return self._confdata['idp']['cert_file']

    @property
    def idp_certificate(self):
        return self._idp_certificate

    @property
    def entity_id(self):
        return self._confdata['idp']['entity_id']

    @property
    def single_logout_services(self):
        return list(self._confdata['idp'].get('single_logout_services', []))

    @property
    def sp_entity_id(self):
        return self._confdata['sp']['entity_id']

    @property
    def acs_url(self):
        return self._confdata['sp']['acs_url']

    @property
    def relay_state(self):
        return self._confdata.get('relay_state')

    @property
    def mode(self):
        return self._confdata.get('mode', FAIL_FAST)

    @property
    def accumulate(self):
        return self.mode == ACCUMULATE

    def metadata_context(self):
        return build_metadata_context(
            self.entity_id, self.idp_certificate, self.single_logout_services,
        )

    def expectations(self, in_response_to):
        return Expectations(
            relay_state=self.relay_state,
            in_response_to=in_response_to,
            recipient=self.acs_url,
            audience=self.sp_entity_id,
        )


class BaseConfigParser(object):

    def __init__(self, path):
        self._path = path
        self._fp = None

    def parse(self):
        try:
            return self._parse()
        except OSError:
            raise BadConfiguration(
                'Unable to access the configuration file: {}'.format(self._path))
        except (yaml.YAMLError, ValueError):
            raise BadConfiguration(
                'Syntax error in the configuration file: {}'.format(self._path))

    def _parse(self):
        with open(self._path, 'r') as fp:
            self._fp = fp
            return self._deserialize()


class YAMLConfigParser(BaseConfigParser):

    def _deserialize(self):
        return yaml.safe_load(self._fp)


class JSONConfigParser(BaseConfigParser):

    def _deserialize(self):
        return json.load(self._fp)


def _get_parser_class(fileformat):
    try:
        return {
            'yaml': YAMLConfigParser,
            'json': JSONConfigParser,
        }[fileformat]
    except KeyError:
        raise BadConfiguration('Unknown configuration type: {}'.format(fileformat))


def load(f_name, f_type='yaml'):
    """
    Load configuration from a YAML or JSON file
    """
    parser = _get_parser_class(f_type)(f_name)
    confdata = parser.parse()
    ConfigValidator(confdata).validate()
    return Config(confdata)
