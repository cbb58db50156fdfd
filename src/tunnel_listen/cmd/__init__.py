"""Command line interface modules.

This package provides the command-line tools for:
- Loading a server configuration file
- Validating its listen directives
- Displaying the resulting endpoints and thread totals
- Error reporting and logging
"""
