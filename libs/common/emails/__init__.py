"""
Storefront email package.

Modules:
- core: Base send_email function (SMTP)
- store: Order notification templates
"""
