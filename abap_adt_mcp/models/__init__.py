"""Argument models for ADT tools."""

from .arguments import (
    ActivateByNameArgs,
    GetSourceArgs,
    LockArgs,
    ObjectUrlArgs,
    SearchObjectArgs,
    SetSourceArgs,
    ToolArgs,
    UnlockArgs,
)

__all__ = [
    'ActivateByNameArgs',
    'GetSourceArgs',
    'LockArgs',
    'ObjectUrlArgs',
    'SearchObjectArgs',
    'SetSourceArgs',
    'ToolArgs',
    'UnlockArgs',
]
