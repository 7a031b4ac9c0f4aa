"""External service clients for communicating with external systems"""

from .rekognition_face_index import RekognitionFaceIndex, translate_error

__all__ = [
    "RekognitionFaceIndex",
    "translate_error",
]
