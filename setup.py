import pathlib
import re
import sys

from setuptools import setup

if sys.version_info < (3, 10):
    raise RuntimeError("biskviit requires Python 3.10+")


HERE = pathlib.Path(__file__).parent

txt = (HERE / "biskviit" / "__init__.py").read_text("utf-8")
try:
    version = re.findall(r'^__version__ = "([^"]+)"\r?$', txt, re.M)[0]
except IndexError:
    raise RuntimeError("Unable to determine version.")

install_requires = [
    "attrs>=21.3.0",
    "multidict>=6.0,<7.0",
    "yarl>=1.9,<2.0",
]

tests_require = [
    "freezegun>=1.2",
    "pytest>=7.0",
]


setup(
    name="biskviit",
    version=version,
    description="In-memory HTTP cookie jar",
    long_description=(HERE / "README.rst").read_text("utf-8"),
    long_description_content_type="text/x-rst",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Development Status :: 5 - Production/Stable",
        "Operating System :: OS Independent",
        "Topic :: Internet :: WWW/HTTP",
    ],
    license="MIT",
    packages=["biskviit"],
    package_data={"biskviit": ["py.typed"]},
    python_requires=">=3.10",
    install_requires=install_requires,
    extras_require={"test": tests_require},
    include_package_data=True,
)
