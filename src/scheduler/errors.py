class PipelineStageError(Exception):
    """Raised when a fatal error aborts the run; names the failing stage."""

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"{stage} stage failed: {cause}")
        self.stage = stage
        self.cause = cause
