"""
EventFace application, root package.

Indexes event photos and video frames into one face collection per event,
searches them with a user's selfie and keeps each user's current matches.
Contains the FastAPI entry point (main.py), API routes, domain model,
application services and infrastructure adapters (S3, Rekognition, MongoDB,
OpenCV).
"""
