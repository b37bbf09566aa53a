# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for ShopStack Auth.

Domains:
    auth: Password hashing, session and reset tokens, auth flows.
    user: Credential persistence.
"""
