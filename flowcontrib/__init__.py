"""Expression functions and activities (logging, mappings, shared state, channels, SQL, REST, XML) for flow-based integration apps."""

__version__ = "0.1.0"