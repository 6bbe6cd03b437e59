"""
Project and permission management feature module.

Projects own permissions and permission groups; groups toggle permissions
on and off through link rows.
"""
