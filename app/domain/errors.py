# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from enum import Enum


class ResourceType(str, Enum):
    """Enumeration for resource types."""

    DATA_PROCESSOR = "DataProcessor"
    PROCESSOR_PARAMETER = "ProcessorParameter"
    OUTPUT_FILE = "OutputFile"
    SUBJECT = "Subject"


class ServiceError(Exception):
    """Base exception for service-related errors."""


class ResourceError(ServiceError):
    """Base exception for resource-related errors."""

    def __init__(self, resource_type: ResourceType, resource_id: str | None, message: str):
        super().__init__(message)
        self.resource_type: ResourceType = resource_type
        self.resource_id: str | None = resource_id


class ResourceNotFoundError(ResourceError):
    """Exception raised when a resource is not found."""

    def __init__(self, resource_type: ResourceType, resource_id: str | None = None, message: str | None = None):
        msg = message or f"{resource_type.value} with ID {resource_id} not found."
        super().__init__(resource_type, resource_id, msg)


class PersistenceError(ResourceError):
    """Exception raised when the storage layer rejects a write (constraint violation, missing reference)."""

    def __init__(self, resource_type: ResourceType, resource_id: str | None = None, message: str | None = None):
        msg = message or f"{resource_type.value} with ID {resource_id} could not be persisted."
        super().__init__(resource_type, resource_id, msg)


class ResourceAlreadyExistsError(PersistenceError):
    """Exception raised when a resource with the same slug or id already exists."""

    def __init__(
        self,
        resource_type: ResourceType,
        resource_value: str | None = None,
        field: str = "slug",
        message: str | None = None,
    ):
        """
        Initialize ResourceAlreadyExistsError.

        Args:
            resource_type: Type of resource (e.g., DATA_PROCESSOR)
            resource_value: The actual value that caused the conflict (e.g., "image-resize")
            field: The field that caused the conflict (e.g., "slug", "id")
            message: Custom error message. If not provided, generates a default message.
        """
        if not message:
            if field == "id":
                msg = f"{resource_type.value} with ID '{resource_value}' already exists."
            elif resource_value:
                msg = f"{resource_type.value} with {field} '{resource_value}' already exists."
            else:
                msg = f"{resource_type.value} constraint violation: {field} must be unique."
        else:
            msg = message
        super().__init__(resource_type, resource_value, msg)
        self.field = field


class ConcurrentModificationError(ResourceError):
    """Exception raised when a resource was modified by someone else since it was read."""

    def __init__(
        self,
        resource_type: ResourceType,
        resource_id: str,
        expected_version: int | None = None,
        actual_version: int | None = None,
        message: str | None = None,
    ):
        if not message:
            msg = f"{resource_type.value} with ID {resource_id} was modified concurrently"
            if expected_version is not None and actual_version is not None:
                msg += f" (expected version {expected_version}, found {actual_version})"
            msg += "."
        else:
            msg = message
        super().__init__(resource_type, resource_id, msg)
        self.expected_version = expected_version
        self.actual_version = actual_version
