"""
Pipeline steps for mutator processing.

Each step handles one aspect of a create, update or delete:
- Input sanitization
- Document lookup
- Validation (schema, validate callbacks, caller validator)
- Lifecycle callbacks (before, after, async)
- Derived fields (on_create / on_update)
- Execution
- Read restriction
"""

from .sanitization import SanitizationStep
from .lookup import DocumentLookupStep
from .validation import (
    CallbackValidationStep,
    CustomValidatorStep,
    SchemaValidationStep,
)
from .callbacks import AfterCallbacksStep, AsyncCallbacksStep, BeforeCallbacksStep
from .derivation import DerivedFieldsStep
from .execution import CreateExecutionStep, DeleteExecutionStep, UpdateExecutionStep
from .restriction import ReadRestrictionStep

__all__ = [
    # Input processing
    "SanitizationStep",
    "DocumentLookupStep",
    # Validation
    "SchemaValidationStep",
    "CallbackValidationStep",
    "CustomValidatorStep",
    # Callbacks
    "BeforeCallbacksStep",
    "AfterCallbacksStep",
    "AsyncCallbacksStep",
    # Derivation
    "DerivedFieldsStep",
    # Execution
    "CreateExecutionStep",
    "UpdateExecutionStep",
    "DeleteExecutionStep",
    # Output
    "ReadRestrictionStep",
]
