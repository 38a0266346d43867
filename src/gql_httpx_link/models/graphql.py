"""Pydantic models for GraphQL requests and results.

`Request` is what a link receives: the operation text plus variables and the
typed `Context` bag travelling down the chain. `Response` is what the link
yields back up: parsed `data` / `errors` plus the context, which the HTTP
link extends with the response status.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..context import Context


class ErrorLocation(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    line: int
    column: int


class GraphQLError(BaseModel):
    """A single entry of a GraphQL `errors` list.

    Unknown keys are kept as extra fields so server specific members survive
    parsing untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    message: str
    locations: Optional[List[ErrorLocation]] = None
    path: Optional[List[Union[str, int]]] = None
    extensions: Optional[Dict[str, Any]] = None


class Request(BaseModel):
    """A GraphQL operation to execute."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    query: str
    variables: Dict[str, Any] = Field(default_factory=dict)
    operation_name: Optional[str] = None
    extensions: Optional[Dict[str, Any]] = None
    context: Context = Field(default_factory=Context)

    def with_context(self, context: Context) -> "Request":
        return self.model_copy(update={"context": context})


class Response(BaseModel):
    """Result of executing a `Request`."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLError]] = None
    context: Context = Field(default_factory=Context)

    def with_context(self, context: Context) -> "Response":
        return self.model_copy(update={"context": context})
