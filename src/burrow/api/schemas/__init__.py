from burrow.api.schemas.common import ErrorBody, HealthBody, ProblemDetail, ResourceBody

__all__ = ["ErrorBody", "HealthBody", "ProblemDetail", "ResourceBody"]
