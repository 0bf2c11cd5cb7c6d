"""Route modules, one per resource.

Routes translate HTTP to service calls and back; business rules live in the
services.
"""
