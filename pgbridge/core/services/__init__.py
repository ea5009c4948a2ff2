"""Services — the file-application engine and its collaborators."""
