from halp.utils.sse import SSEFrame, iter_frames, to_frame

__all__ = ["SSEFrame", "iter_frames", "to_frame"]
