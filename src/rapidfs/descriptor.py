"""Domain descriptor records.

A descriptor maps an external domain name (``my-api.apps.example.com``) to the
service it serves. It is stored as a small JSON document under ``domains/``.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

from .exceptions import DescriptorParseError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class TenantContext(BaseModel):
    """
    Immutable (service id, version, draft flag) triple a binding is scoped to.

    Examples:
        TenantContext(service_id=123, version="v1", is_draft=False)
        TenantContext.from_json(b'{"service_id": 123, "version": "v1", "is_draft": true}')
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    service_id: StrictInt = Field(ge=INT64_MIN, le=INT64_MAX)
    version: str
    is_draft: StrictBool

    @classmethod
    def from_json(cls, data: bytes, source: str = "<descriptor>") -> "TenantContext":
        """
        Parse a descriptor document.

        Args:
            data: Raw UTF-8 JSON bytes
            source: Name used in error messages (usually the domain)

        Raises:
            DescriptorParseError: If the bytes are not a valid descriptor
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as error:
            raise DescriptorParseError(
                f"Error parsing descriptor {source}: {error.error_count()} validation error(s) - "
                + "; ".join(f"{'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}" for e in error.errors()),
                raw_content=data.decode("utf-8", errors="replace"),
                path=source,
            ) from error

    def to_json(self) -> bytes:
        return self.model_dump_json().encode("utf-8")
