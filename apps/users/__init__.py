"""Users app package.

Identity of the callers of the booking engine. It defines a custom user
model with two roles: customers, who book venues for themselves, and
operators, who manage venues and may act on any booking. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
