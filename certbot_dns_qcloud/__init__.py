"""

This plugin automates the process of completing a dns-01 challenge by creating,
and subsequently removing, TXT records using the Tencent Cloud DNS (qcloud cns)
API.


Named Arguments
---------------

========================================  =====================================
``--dns-qcloud-credentials``              qcloud CNS credentials_ INI file.
                                          (Optional when the environment
                                          variables below are set)
``--dns-qcloud-propagation-seconds``      The number of seconds to wait for DNS
                                          to propagate before asking the ACME
                                          server to verify the DNS record.
                                          (Default: ``QCLOUD_PROPAGATION_TIMEOUT``
                                          or 60)
========================================  =====================================


Credentials
-----------

Use of this plugin requires a Tencent Cloud API key (SecretId and SecretKey)
with access to the CNS domains being validated, supplied either in a
configuration file or in the environment.

.. code-block:: ini
   :name: qcloud.ini
   :caption: Example credentials file:

   # Tencent Cloud API key used by Certbot
   dns_qcloud_secret_id = AKIDxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
   dns_qcloud_secret_key = xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx

The path to this file can be provided interactively or using the
``--dns-qcloud-credentials`` command-line argument. Certbot records the path
to this file for use during renewal, but does not store the file's contents.

.. caution::
   You should protect these API credentials as you would a password. Users who
   can read this file can use these credentials to issue arbitrary API calls on
   your behalf. Users who can cause Certbot to run using these credentials can
   complete a ``dns-01`` challenge to acquire new certificates or revoke
   existing certificates for associated domains, even if those domains aren't
   being managed by this server.

Certbot will emit a warning if it detects that the credentials file can be
accessed by other users on your system. The warning reads "Unsafe permissions
on credentials configuration file", followed by the path to the credentials
file.

Environment
-----------

===================================  ==========================================
``QCLOUD_SECRET_ID``                 API SecretId, used when no credentials
                                     file is given.
``QCLOUD_SECRET_KEY``                API SecretKey, used when no credentials
                                     file is given.
``QCLOUD_TTL``                       TTL of the TXT record. (Default: 600)
``QCLOUD_PROPAGATION_TIMEOUT``       Default for
                                     ``--dns-qcloud-propagation-seconds``.
``QCLOUD_POLLING_INTERVAL``          Polling interval reported to propagation
                                     checks. (Default: 2)
``QCLOUD_HTTP_TIMEOUT``              Timeout of each API request in seconds,
                                     0 keeps the SDK default. (Default: 0)
===================================  ==========================================

Examples
--------

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``

   certbot certonly \\
     --authenticator dns-qcloud \\
     --dns-qcloud-credentials ~/.secrets/certbot/qcloud.ini \\
     -d example.com

.. code-block:: bash
   :caption: To acquire a wildcard certificate using credentials from the
             environment

   QCLOUD_SECRET_ID=... QCLOUD_SECRET_KEY=... certbot certonly \\
     --authenticator dns-qcloud \\
     -d example.com \\
     -d '*.example.com'

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``, waiting 240 seconds
             for DNS propagation

   certbot certonly \\
     --authenticator dns-qcloud \\
     --dns-qcloud-credentials ~/.secrets/certbot/qcloud.ini \\
     --dns-qcloud-propagation-seconds 240 \\
     -d example.com

"""
