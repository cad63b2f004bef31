# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential and session primitives.

This package provides:
- Password hashing/verification (argon2id)
- Session id signing with a process-wide Ed25519 key pair (cryptography)
- Session issuance on top of a storage backend
"""
