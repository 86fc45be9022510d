"""Managed build exports."""

from .build_document import BuildDocumentError, ManagedBuildDocument, prepare_managed_document
from .bundle_registry import BundleRegistry
from .cloud_build_cli import BuildDescriptionError, CloudBuildCli

__all__ = [
    "BuildDescriptionError",
    "BuildDocumentError",
    "BundleRegistry",
    "CloudBuildCli",
    "ManagedBuildDocument",
    "prepare_managed_document",
]
