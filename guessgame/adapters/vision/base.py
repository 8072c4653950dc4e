class VisionAdapter:
    """Classifier seam. Both calls return RecognizeResult, or None when there is no prediction yet."""

    def recognize_once(self):
        """Classify without a frame (adapter grabs its own input or has nothing to say)."""
        raise NotImplementedError

    def identify(self, image_bytes: bytes):
        """Classify one JPEG frame."""
        return self.recognize_once()
