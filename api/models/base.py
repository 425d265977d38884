# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base models with common configuration.
"""

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Base model for API request and response bodies."""
    
    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Use enum values instead of enum objects
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True
    )


class FrozenModel(BaseModel):
    """Base model for immutable value objects."""
    
    model_config = ConfigDict(
        frozen=True,
        use_enum_values=True
    )
