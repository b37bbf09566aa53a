"""ShopStack authentication service.

Stateless session tokens carried in an HttpOnly cookie, and password
reset links that stop working as soon as the password changes.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
