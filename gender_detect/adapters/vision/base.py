from gender_detect.orchestrator.contracts import ImageData


class VisionAdapter:
    # Hosted models need an API key; the classifier refuses to call them without one
    requires_credential = True

    async def ask(self, image: ImageData, prompt: str) -> str:
        """Send the image inline with the prompt and return the model's raw text reply."""
        raise NotImplementedError

    async def aclose(self):
        pass
