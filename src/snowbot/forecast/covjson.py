"""Pydantic schemas for CoverageJSON position-query responses.

Only the parts of the document the decoder reads are declared; everything
else (x/y axes, referencing, parameter metadata) is accepted and ignored.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


class CovAxis(BaseModel):
    """Time axis values.

    Attributes:
        values: ISO-8601 instants, either flat or grouped in chunks
            (one chunk per forecast init time)
    """

    values: Union[list[str], list[list[str]]]

    model_config = {"extra": "allow"}


class CovAxes(BaseModel):
    """Domain axes. Only ``t`` is required."""

    t: CovAxis

    model_config = {"extra": "allow"}


class CovDomain(BaseModel):
    """Coverage domain."""

    axes: CovAxes

    model_config = {"extra": "allow"}


class CovRange(BaseModel):
    """One parameter's values.

    Attributes:
        values: Flat row-major array (time-major, then location).
            ``null`` and non-numeric entries (booleans, strings) are stored
            as null and never count as positive.
        axis_names: Axis order declared by the server, if present
        shape: Array shape declared by the server, if present
    """

    values: list[Optional[float]]
    axis_names: Optional[list[str]] = Field(default=None, alias="axisNames")
    shape: Optional[list[int]] = None

    model_config = {"populate_by_name": True, "extra": "allow"}

    @field_validator("values", mode="before")
    @classmethod
    def non_numeric_to_null(cls, v):
        if not isinstance(v, list):
            return v
        return [
            x if isinstance(x, (int, float)) and not isinstance(x, bool) else None
            for x in v
        ]


class CovJsonResponse(BaseModel):
    """CoverageJSON document returned by a position query."""

    domain: CovDomain
    ranges: dict[str, CovRange]

    model_config = {
        "extra": "allow",
        "json_schema_extra": {
            "examples": [
                {
                    "domain": {
                        "axes": {
                            "t": {"values": ["2024-01-19T14:00:00Z", "2024-01-19T15:00:00Z"]},
                        }
                    },
                    "ranges": {
                        "categorical_snow_surface": {
                            "axisNames": ["t", "points"],
                            "shape": [2, 1],
                            "values": [1, 0],
                        }
                    },
                }
            ]
        },
    }
