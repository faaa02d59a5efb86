"""
Service layer: operations the routes, the worker and the scripts share.

Services take their backends as arguments and raise ``portfolio.errors``
exceptions instead of HTTP errors.
"""
