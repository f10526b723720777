# src/vmoperator/webhooks/resource_policy.py
"""
Admission validation for VirtualMachineSetResourcePolicy objects.

A resource policy describes the vSphere resource pool, folder and cluster
module groups a set of VMs is placed into. The validator checks:

    - On create: CPU and memory reservations do not exceed their limits
      (when both are set) and cluster module group names are unique
    - On update: resourcePool, folder and clusterModuleGroups are immutable
    - On delete: always allowed

Admission objects arrive as plain dictionaries and are decoded explicitly
with resource_policy_from_dict. A decode failure is answered with a 400
response; field validation failures are answered with a 422 denial whose
reasons are Kubernetes style field error strings.

Example:
    >>> validator = ResourcePolicyValidator()
    >>> response = validator.validate_create(obj)
    >>> if not response.allowed:
    ...     print(response.message)
"""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ..constants import VM_OPERATOR_KEY
from ..exceptions import InvalidArgumentError
from ..utils.quantity import parse_quantity, quantity_value

logger = logging.getLogger(__name__)

RESOURCE_POLICY_KIND = "VirtualMachineSetResourcePolicy"

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNPROCESSABLE_ENTITY = 422


# =============================================================================
# Decoded types
# =============================================================================


@dataclass
class ResourceQuantity:
    """A Kubernetes quantity; compares by value, so "1Gi" equals "1024Mi"."""

    raw: str = field(default="", compare=False)
    value: Decimal = Decimal(0)

    @classmethod
    def parse(cls, raw: Any) -> "ResourceQuantity":
        if raw is None or raw == "":
            return cls()
        return cls(raw=str(raw), value=parse_quantity(raw))

    def is_zero(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        return self.raw or "0"


@dataclass
class ResourceAllocation:
    cpu: ResourceQuantity = field(default_factory=ResourceQuantity)
    memory: ResourceQuantity = field(default_factory=ResourceQuantity)

    def to_dict(self) -> dict[str, str]:
        return {"cpu": str(self.cpu), "memory": str(self.memory)}


@dataclass
class ResourcePoolSpec:
    """Resource pool a policy creates, with its reservations and limits."""

    name: str = ""
    reservations: ResourceAllocation = field(default_factory=ResourceAllocation)
    limits: ResourceAllocation = field(default_factory=ResourceAllocation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "reservations": self.reservations.to_dict(),
            "limits": self.limits.to_dict(),
        }


@dataclass
class ResourcePolicySpec:
    resource_pool: ResourcePoolSpec = field(default_factory=ResourcePoolSpec)
    folder: str = ""
    cluster_module_groups: list[str] = field(default_factory=list)


@dataclass
class ResourcePolicy:
    """A decoded VirtualMachineSetResourcePolicy."""

    name: str = ""
    namespace: str = ""
    spec: ResourcePolicySpec = field(default_factory=ResourcePolicySpec)


# =============================================================================
# Decoding
# =============================================================================


def _mapping(value: Any, path: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidArgumentError(f"{path}: expected an object, got {type(value).__name__}")
    return value


def _string(value: Any, path: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{path}: expected a string, got {type(value).__name__}")
    return value


def _quantity(value: Any, path: str) -> ResourceQuantity:
    if isinstance(value, bool) or not isinstance(value, (str, int, float, type(None))):
        raise InvalidArgumentError(f"{path}: expected a quantity, got {type(value).__name__}")
    try:
        return ResourceQuantity.parse(value)
    except InvalidArgumentError as e:
        raise InvalidArgumentError(f"{path}: {e.message}") from e


def _allocation(value: Any, path: str) -> ResourceAllocation:
    data = _mapping(value, path)
    return ResourceAllocation(
        cpu=_quantity(data.get("cpu"), f"{path}.cpu"),
        memory=_quantity(data.get("memory"), f"{path}.memory"),
    )


def resource_policy_from_dict(obj: Any) -> ResourcePolicy:
    """
    Decode an admission object into a ResourcePolicy.

    Args:
        obj: The object from the admission request

    Returns:
        Decoded ResourcePolicy

    Raises:
        InvalidArgumentError: If the object has the wrong kind or shape
    """
    obj = _mapping(obj, "object")
    kind = obj.get("kind")
    if kind is not None and kind != RESOURCE_POLICY_KIND:
        raise InvalidArgumentError(f"expected kind {RESOURCE_POLICY_KIND}, got {kind}")

    api_version = _string(obj.get("apiVersion"), "apiVersion")
    if api_version and api_version.partition("/")[0] != VM_OPERATOR_KEY:
        raise InvalidArgumentError(f"expected API group {VM_OPERATOR_KEY}, got {api_version}")

    metadata = _mapping(obj.get("metadata"), "metadata")
    spec = _mapping(obj.get("spec"), "spec")
    pool = _mapping(spec.get("resourcePool"), "spec.resourcePool")

    groups = spec.get("clusterModuleGroups") or []
    if not isinstance(groups, list):
        raise InvalidArgumentError(
            f"spec.clusterModuleGroups: expected a list, got {type(groups).__name__}"
        )

    return ResourcePolicy(
        name=_string(metadata.get("name"), "metadata.name"),
        namespace=_string(metadata.get("namespace"), "metadata.namespace"),
        spec=ResourcePolicySpec(
            resource_pool=ResourcePoolSpec(
                name=_string(pool.get("name"), "spec.resourcePool.name"),
                reservations=_allocation(pool.get("reservations"), "spec.resourcePool.reservations"),
                limits=_allocation(pool.get("limits"), "spec.resourcePool.limits"),
            ),
            folder=_string(spec.get("folder"), "spec.folder"),
            cluster_module_groups=[
                _string(g, f"spec.clusterModuleGroups[{i}]") for i, g in enumerate(groups)
            ],
        ),
    )


# =============================================================================
# Results
# =============================================================================


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value)
    return json.dumps(value, sort_keys=True)


@dataclass
class FieldError:
    """A validation failure on one field, rendered like a Kubernetes field error."""

    path: str
    error_type: str
    value: Any = None
    detail: str = ""

    @classmethod
    def invalid(cls, path: str, value: Any, detail: str) -> "FieldError":
        return cls(path=path, error_type="Invalid value", value=value, detail=detail)

    @classmethod
    def duplicate(cls, path: str, value: Any) -> "FieldError":
        return cls(path=path, error_type="Duplicate value", value=value)

    def __str__(self) -> str:
        text = f"{self.path}: {self.error_type}: {_render_value(self.value)}"
        if self.detail:
            text += f": {self.detail}"
        return text


@dataclass
class ValidationResponse:
    """Outcome of an admission check."""

    allowed: bool
    code: int = HTTP_OK
    reasons: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return ", ".join(self.reasons)

    @classmethod
    def allow(cls) -> "ValidationResponse":
        return cls(allowed=True)

    @classmethod
    def errored(cls, code: int, error: Exception) -> "ValidationResponse":
        return cls(allowed=False, code=code, reasons=[str(error)])

    @classmethod
    def from_field_errors(cls, errors: list[FieldError]) -> "ValidationResponse":
        if not errors:
            return cls.allow()
        return cls(
            allowed=False,
            code=HTTP_UNPROCESSABLE_ENTITY,
            reasons=[str(e) for e in errors],
        )

    def to_dict(self) -> dict[str, Any]:
        return {"allowed": self.allowed, "code": self.code, "reasons": list(self.reasons)}


# =============================================================================
# Validator
# =============================================================================


def _validate_reservation_and_limit(
    path: str, reservation: ResourceQuantity, limit: ResourceQuantity
) -> list[FieldError]:
    if reservation.is_zero() or limit.is_zero():
        return []
    if quantity_value(reservation.value) <= quantity_value(limit.value):
        return []
    return [
        FieldError.invalid(path, str(reservation), "reservation value cannot exceed the limit value")
    ]


def _validate_immutable(path: str, new: Any, old: Any, rendered: Any) -> list[FieldError]:
    if new == old:
        return []
    return [FieldError.invalid(path, rendered, "field is immutable")]


class ResourcePolicyValidator:
    """Validates create, update and delete of VirtualMachineSetResourcePolicy."""

    kind = RESOURCE_POLICY_KIND

    def validate_create(self, obj: Any) -> ValidationResponse:
        try:
            policy = resource_policy_from_dict(obj)
        except InvalidArgumentError as e:
            logger.debug(f"Rejecting undecodable {self.kind}: {e}")
            return ValidationResponse.errored(HTTP_BAD_REQUEST, e)

        errors = self.validate_spec(policy.spec)
        if errors:
            logger.info(f"Denied create of {self.kind} {policy.namespace}/{policy.name}: {len(errors)} error(s)")
        return ValidationResponse.from_field_errors(errors)

    def validate_update(self, obj: Any, old_obj: Any) -> ValidationResponse:
        try:
            policy = resource_policy_from_dict(obj)
            old_policy = resource_policy_from_dict(old_obj)
        except InvalidArgumentError as e:
            logger.debug(f"Rejecting undecodable {self.kind}: {e}")
            return ValidationResponse.errored(HTTP_BAD_REQUEST, e)

        errors = self.validate_allowed_changes(policy.spec, old_policy.spec)
        if errors:
            logger.info(f"Denied update of {self.kind} {policy.namespace}/{policy.name}: {len(errors)} error(s)")
        return ValidationResponse.from_field_errors(errors)

    def validate_delete(self, obj: Any = None) -> ValidationResponse:
        return ValidationResponse.allow()

    def validate_spec(self, spec: ResourcePolicySpec) -> list[FieldError]:
        """Check reservations against limits and cluster module group uniqueness."""
        errors: list[FieldError] = []

        reservations_path = "spec.resourcePool.reservations"
        pool = spec.resource_pool
        errors.extend(
            _validate_reservation_and_limit(
                f"{reservations_path}.cpu", pool.reservations.cpu, pool.limits.cpu
            )
        )
        errors.extend(
            _validate_reservation_and_limit(
                f"{reservations_path}.memory", pool.reservations.memory, pool.limits.memory
            )
        )

        seen: set[str] = set()
        for i, name in enumerate(spec.cluster_module_groups):
            if name in seen:
                errors.append(
                    FieldError.duplicate(f"spec.clusterModuleGroups[{i}].clusterModuleGroups", name)
                )
                continue
            seen.add(name)

        return errors

    def validate_allowed_changes(
        self, spec: ResourcePolicySpec, old_spec: ResourcePolicySpec
    ) -> list[FieldError]:
        """Check that no immutable field changed."""
        errors: list[FieldError] = []
        errors.extend(
            _validate_immutable(
                "spec.resourcePool",
                spec.resource_pool,
                old_spec.resource_pool,
                spec.resource_pool.to_dict(),
            )
        )
        errors.extend(_validate_immutable("spec.folder", spec.folder, old_spec.folder, spec.folder))
        errors.extend(
            _validate_immutable(
                "spec.clusterModuleGroups",
                spec.cluster_module_groups,
                old_spec.cluster_module_groups,
                spec.cluster_module_groups,
            )
        )
        return errors
