from os import path
from setuptools import setup
from setuptools import find_packages

version = "0.0.1"

install_requires = [
    "acme>=2.0.0",
    "certbot>=2.0.0",
    "setuptools",
    "tencentcloud-sdk-python>=3.0.0",
]

test_requires = [
    "pytest",
]

this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="certbot-dns-qcloud",
    version=version,
    description="Tencent Cloud CNS DNS Authenticator plugin for Certbot",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="BSD 2-Clause License",
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Plugins",
        "Intended Audience :: System Administrators",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Security",
        "Topic :: System :: Installation/Setup",
        "Topic :: System :: Networking",
        "Topic :: System :: Systems Administration",
        "Topic :: Utilities",
    ],
    packages=find_packages(),
    include_package_data=True,
    install_requires=install_requires,
    extras_require={
        "test": test_requires,
    },
    entry_points={
        "certbot.plugins": [
            "dns-qcloud = certbot_dns_qcloud.dns_qcloud:Authenticator"
        ]
    },
    test_suite="certbot_dns_qcloud",
)
