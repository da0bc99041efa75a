"""
The `packaging` sub-package contains modules related to the construction,
inspection and validation of gzip tar chaincode packages.

This includes:
- Reading code packages into archive entries.
- Validating untrusted code packages against path and mode policies.
- Writing reproducible packages from source trees.
- Orchestrating the build step that produces the binary package.
"""
