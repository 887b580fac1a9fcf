"""Relationship failures, each mapped to the HTTP status the API answers with"""


class RelationshipError(Exception):
    status_code = 400
    default_detail = "Relationship error."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class SelfRelationshipError(RelationshipError, ValueError):
    status_code = 400
    default_detail = "Cannot create a relationship with yourself."


class DuplicateRequestError(RelationshipError, ValueError):
    status_code = 409
    default_detail = "A relationship already exists for this pair."


class NotFound(RelationshipError, LookupError):
    status_code = 404
    default_detail = "Relationship not found."


class Forbidden(RelationshipError, PermissionError):
    status_code = 403
    default_detail = "Not allowed to act on this relationship."


class PreconditionFailed(RelationshipError):
    status_code = 409
    default_detail = "The relationship is not in the expected state."


class ConflictError(RelationshipError):
    """The database refused a concurrent duplicate, the pair is already taken"""

    status_code = 409
    default_detail = "The relationship was created concurrently."
