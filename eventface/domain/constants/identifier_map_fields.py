"""Constants for identifier side-index field names"""


class IdentifierMapFields:
    """Field name constants for identifier mapping documents"""
    COLLECTION_ID = "collection_id"
    EXTERNAL_ID = "external_id"
    ASSET_KEY = "asset_key"
    CREATED_AT = "created_at"

    # MongoDB specific
    MONGO_ID = "_id"
