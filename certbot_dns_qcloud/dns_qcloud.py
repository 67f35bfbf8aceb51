"""DNS Authenticator for Tencent Cloud CNS."""
import json
import logging

from tencentcloud.common import credential
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile
from tencentcloud.dnspod.v20210323 import dnspod_client, models

from acme import challenges
from certbot import errors
from certbot.compat import os
from certbot.plugins import dns_common

logger = logging.getLogger(__name__)

DNSPOD_ENDPOINT = "dnspod.tencentcloudapi.com"
# name of the default resolution line
DEFAULT_RECORD_LINE = "默认"
PAGE_LENGTH = 3000
# error codes returned instead of an empty list
NO_DATA_ERROR_PREFIX = "ResourceNotFound.NoDataOf"

DEFAULT_TTL = 600
DEFAULT_PROPAGATION_TIMEOUT = 60
DEFAULT_POLLING_INTERVAL = 2
DEFAULT_HTTP_TIMEOUT = 0

ENV_SECRET_ID = "QCLOUD_SECRET_ID"
ENV_SECRET_KEY = "QCLOUD_SECRET_KEY"


def _env_int(environ, name, default):
    value = environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"ignoring {name}={value!r}, expected an integer; using {default}")
        return default


class Config(object):
    """Settings for talking to qcloud cns."""

    def __init__(self, secret_id=None, secret_key=None, ttl=DEFAULT_TTL,
                 propagation_timeout=DEFAULT_PROPAGATION_TIMEOUT,
                 polling_interval=DEFAULT_POLLING_INTERVAL, http_timeout=None):
        self.secret_id = secret_id
        self.secret_key = secret_key
        self.ttl = ttl
        self.propagation_timeout = propagation_timeout
        self.polling_interval = polling_interval
        self.http_timeout = http_timeout

    @classmethod
    def from_env(cls, environ=None):
        """
        Build a configuration from QCLOUD_* environment variables.

        Numeric values that are missing or can't be parsed keep their defaults.
        The secrets are read as-is and may be None.
        """
        if environ is None:
            environ = os.environ
        http_timeout = _env_int(environ, "QCLOUD_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)
        return cls(
            secret_id=environ.get(ENV_SECRET_ID) or None,
            secret_key=environ.get(ENV_SECRET_KEY) or None,
            ttl=_env_int(environ, "QCLOUD_TTL", DEFAULT_TTL),
            propagation_timeout=_env_int(environ, "QCLOUD_PROPAGATION_TIMEOUT",
                                         DEFAULT_PROPAGATION_TIMEOUT),
            polling_interval=_env_int(environ, "QCLOUD_POLLING_INTERVAL",
                                      DEFAULT_POLLING_INTERVAL),
            # 0 or less keeps the SDK request timeout
            http_timeout=http_timeout if http_timeout > 0 else None,
        )

    def has_env_credentials(self):
        return bool(self.secret_id or self.secret_key)

    def require_credentials(self):
        missing = [name for name, value in ((ENV_SECRET_ID, self.secret_id),
                                            (ENV_SECRET_KEY, self.secret_key))
                   if not value]
        if missing:
            raise errors.PluginError(
                "qcloud cns: some credentials information are missing: " + ",".join(missing))

    def validate(self):
        if not self.secret_key:
            raise errors.PluginError("qcloud cns: credentials missing")


def strip_wildcard(domain):
    """
    Drop a leading wildcard label.

    CNS refuses ``_acme-challenge.*`` as a sub-domain (RecordCreate.SubDomainInvalid),
    and the validation record of ``*.example.com`` lives at
    ``_acme-challenge.example.com`` anyway.
    """
    if domain.startswith("*."):
        return domain[2:]
    return domain


def extract_record_name(fqdn, zone):
    """
    Return the name of `fqdn` relative to `zone`.

    :param str fqdn: Fully-qualified record name, trailing dot optional.
    :param str zone: The zone name as known to CNS.
    :returns: The leaf name, e.g. ``_acme-challenge.www`` for
        ``_acme-challenge.www.example.com.`` in ``example.com``.
    :rtype: str
    """
    name = fqdn.rstrip(".")
    suffix = "." + zone.rstrip(".")
    if name.endswith(suffix):
        return name[:-len(suffix)]
    return name


def validation_fqdn(domain):
    return "{0}.{1}".format(challenges.DNS01.LABEL, domain)


class Authenticator(dns_common.DNSAuthenticator):
    """DNS Authenticator for Tencent Cloud CNS

    This Authenticator uses the Tencent Cloud DNS API to fulfill a dns-01 challenge.
    """

    description = "Obtain certificates using a DNS TXT record (if you are using Tencent Cloud CNS for DNS)."

    def __init__(self, *args, **kwargs):
        super(Authenticator, self).__init__(*args, **kwargs)
        self.credentials = None
        self.qcloud_config = Config.from_env()

    @classmethod
    def add_parser_arguments(cls, add):
        default_propagation_seconds = _env_int(
            os.environ, "QCLOUD_PROPAGATION_TIMEOUT", DEFAULT_PROPAGATION_TIMEOUT)
        super(Authenticator, cls).add_parser_arguments(
            add, default_propagation_seconds=default_propagation_seconds)
        add("credentials",
            help="qcloud CNS credentials INI file. If omitted, the environment variables "
                 f"{ENV_SECRET_ID} and {ENV_SECRET_KEY} are used.")

    def more_info(self):
        return (
            "This plugin configures a DNS TXT record to respond to a dns-01 challenge using "
            + "the Tencent Cloud CNS API."
        )

    def _setup_credentials(self):
        if not self.conf("credentials") and self.qcloud_config.has_env_credentials():
            logger.debug("using qcloud credentials from the environment")
            self.qcloud_config.require_credentials()
        else:
            self.credentials = self._configure_credentials(
                "credentials",
                "qcloud CNS credentials INI file",
                {
                    "secret_id": "SecretId of a Tencent Cloud API key.",
                    "secret_key": "SecretKey of a Tencent Cloud API key.",
                },
            )
            self.qcloud_config.secret_id = self.credentials.conf("secret_id")
            self.qcloud_config.secret_key = self.credentials.conf("secret_key")
        self.qcloud_config.validate()

    def _perform(self, domain, validation_name, validation):
        domain = strip_wildcard(domain)
        self._get_cns_client().add_txt_record(
            domain, validation_fqdn(domain), validation, self.qcloud_config.ttl
        )

    def _cleanup(self, domain, validation_name, validation):
        domain = strip_wildcard(domain)
        self._get_cns_client().del_txt_record(domain, validation_fqdn(domain))

    def timeout(self):
        """
        Timeout and polling interval for DNS propagation checks.

        :returns: ``(propagation_timeout, polling_interval)`` in seconds.
        :rtype: tuple
        """
        return self.conf("propagation-seconds"), self.qcloud_config.polling_interval

    def _get_cns_client(self):
        return _CNSClient(
            self.qcloud_config.secret_id,
            self.qcloud_config.secret_key,
            timeout=self.qcloud_config.http_timeout,
        )


class _CNSClient(object):
    """
    Encapsulates all communication with the Tencent Cloud DNS API.
    """

    def __init__(self, secret_id, secret_key, timeout=None):
        logger.debug("creating cns client")
        http_profile = HttpProfile()
        http_profile.endpoint = DNSPOD_ENDPOINT
        if timeout:
            http_profile.reqTimeout = timeout
        client_profile = ClientProfile()
        client_profile.httpProfile = http_profile
        self.dnspod = dnspod_client.DnspodClient(
            credential.Credential(secret_id, secret_key), "", client_profile
        )

    def _api_request(self, action, request):
        logger.debug(f"API Request {action}")
        try:
            response = getattr(self.dnspod, action)(request)
        except TencentCloudSDKException as e:
            if (e.get_code() or "").startswith(NO_DATA_ERROR_PREFIX):
                logger.debug(f"{action}: {e.get_code()}")
                return {}
            raise errors.PluginError(f"[{e.get_code()}]: {e.get_message()}")
        return json.loads(response.to_json_string())

    def _paged(self, action, request, key, count_key, total_key):
        items = []
        while True:
            request.Offset = len(items)
            request.Limit = PAGE_LENGTH
            data = self._api_request(action, request)
            batch = data.get(key) or []
            items.extend(batch)
            total = int((data.get(count_key) or {}).get(total_key) or 0)
            if not batch or len(items) >= total:
                return items

    def domain_list(self):
        """
        List every domain hosted in the account.

        :returns: Domain objects, each with at least ``DomainId`` and ``Name``.
        :rtype: list
        :raises certbot.errors.PluginError: if the API call fails
        """
        request = models.DescribeDomainListRequest()
        return self._paged("DescribeDomainList", request,
                           "DomainList", "DomainCountInfo", "AllTotal")

    def record_list(self, zone, sub_domain=None, record_type=None):
        """
        List the records of a zone, optionally filtered by name and type.

        :param str zone: The zone name.
        :param str sub_domain: Only return records with this leaf name.
        :param str record_type: Only return records of this type.
        :returns: Record objects with ``RecordId``, ``Name``, ``Type``, ``Value``.
        :rtype: list
        :raises certbot.errors.PluginError: if the API call fails
        """
        request = models.DescribeRecordListRequest()
        request.Domain = zone
        request.Subdomain = sub_domain
        request.RecordType = record_type
        return self._paged("DescribeRecordList", request,
                           "RecordList", "RecordCountInfo", "TotalCount")

    def record_create(self, zone, record):
        request = models.CreateRecordRequest()
        request.Domain = zone
        request.SubDomain = record["Name"]
        request.RecordType = record["Type"]
        request.RecordLine = record["Line"]
        request.Value = record["Value"]
        request.TTL = record["TTL"]
        return self._api_request("CreateRecord", request).get("RecordId")

    def record_delete(self, zone, record_id):
        request = models.DeleteRecordRequest()
        request.Domain = zone
        request.RecordId = record_id
        self._api_request("DeleteRecord", request)

    def add_txt_record(self, domain, record_name, record_content, record_ttl):
        """
        Add a TXT record using the supplied information.

        :param str domain: The domain to use to look up the managed zone.
        :param str record_name: The record name (typically beginning with '_acme-challenge.').
        :param str record_content: The record content (typically the challenge validation).
        :param int record_ttl: The record TTL (number of seconds that the record may be cached).
        :raises certbot.errors.PluginError: if an error occurs communicating with the DNS API
        """
        zone = self._find_managed_zone(domain)
        record = {
            "Type": "TXT",
            "Name": extract_record_name(record_name, zone),
            "Value": record_content,
            "Line": DEFAULT_RECORD_LINE,
            "TTL": record_ttl,
        }
        logger.info(f"insert txt record {record['Name']} in zone {zone}")
        try:
            record_id = self.record_create(zone, record)
        except errors.PluginError as e:
            raise errors.PluginError(f"qcloud cns: RecordCreate() API call failed: {e}")
        logger.debug(f"created record id {record_id}")

    def del_txt_record(self, domain, record_name):
        """
        Delete every TXT record with the supplied name.

        Nothing happens when no such record exists.

        :param str domain: The domain to use to look up the managed zone.
        :param str record_name: The record name (typically beginning with '_acme-challenge.').
        :raises certbot.errors.PluginError: if an error occurs communicating with the DNS API
        """
        zone = self._find_managed_zone(domain)
        records = self.get_existing_txt(zone, record_name)
        if not records:
            logger.debug(f"no txt record {record_name} to delete")
            return
        for record in records:
            logger.info(f"delete {record_name}, id {record['RecordId']}")
            try:
                self.record_delete(zone, record["RecordId"])
            except errors.PluginError as e:
                raise errors.PluginError(f"qcloud cns: RecordDelete() API call failed: {e}")

    def get_existing_txt(self, zone, record_name):
        """
        Get the TXT records of `zone` named `record_name`.

        :param str zone: The managed zone.
        :param str record_name: The record name, fully qualified.
        :returns: Matching record objects, possibly empty.
        :rtype: list
        :raises certbot.errors.PluginError: if the records can't be listed
        """
        name = extract_record_name(record_name, zone)
        try:
            records = self.record_list(zone, sub_domain=name, record_type="TXT")
        except errors.PluginError as e:
            raise errors.PluginError(f"qcloud cns: RecordList() API call has failed: {e}")
        return [r for r in records if r.get("Type") == "TXT" and r.get("Name") == name]

    def _find_managed_zone(self, domain):
        """
        Find the managed zone for a given domain.

        :param str domain: The domain for which to find the managed zone.
        :returns: The name of the managed zone, if found.
        :rtype: str
        :raises certbot.errors.PluginError: if the managed zone cannot be found.
        """
        try:
            zones = self.domain_list()
        except errors.PluginError as e:
            raise errors.PluginError(f"qcloud cns: DomainList() API call failed: {e}")
        names = {zone.get("Name") for zone in zones if zone.get("DomainId")}
        for guess in dns_common.base_domain_name_guesses(domain.rstrip(".")):
            if guess in names:
                logger.debug(f"found zone: {guess}")
                return guess
        raise errors.PluginError(f"zone for {domain} not found in qcloud cns")
