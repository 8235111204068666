"""Step Challenge package.

Daily step competition between employees and locations. Organized by feature
modules (catalog, steps, auth) with a thin Flask controller layer on top of
service/repository layers.
"""
