"""Core building blocks shared by the content and validation packages."""
