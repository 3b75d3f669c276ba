class ConfigurationError (ValueError):

	"""
	Raised when a part or score cannot be generated as configured.
	"""
