# SPDX-License-Identifier: MIT
"""Core data model, configuration and recipe expansion for mkninja."""
