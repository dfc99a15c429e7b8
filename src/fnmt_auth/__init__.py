"""
fnmt_auth — client-certificate authorization for FNMT natural-person certificates.

Decides whether the identity in a TLS client certificate issued by the
Spanish FNMT (country ES, serial number IDCES-<DNI>) is on an
administrator-configured allow-list of full names, DNIs, or
"<full name> - <DNI>" common names.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"
