from .graphql import ErrorLocation, GraphQLError, Request, Response

__all__ = ["ErrorLocation", "GraphQLError", "Request", "Response"]
