# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains middleware components for request validation and
error formatting in the Luz PIX API.
"""
