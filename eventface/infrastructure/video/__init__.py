from .opencv_frame_extractor import OpenCVFrameExtractor, frame_timestamps, thumbnail_timestamp

__all__ = ["OpenCVFrameExtractor", "frame_timestamps", "thumbnail_timestamp"]
