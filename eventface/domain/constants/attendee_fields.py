"""Constants for AttendeeRecord model field names"""


class AttendeeFields:
    """Field name constants for AttendeeRecord model"""
    USER_ID = "user_id"
    COLLECTION_ID = "collection_id"
    SELFIE_REF = "selfie_ref"
    MATCHED_IMAGES = "matched_images"
    MATCHED_VIDEOS = "matched_videos"
    DISPLAY_NAME = "display_name"
    COVER_REF = "cover_ref"
    CREATED_AT = "created_at"
    LAST_UPDATED = "last_updated"
    HAS_CONTRIBUTED = "has_contributed"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field
