# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - exceptions: Error taxonomy mapped to HTTP statuses
# - entities: Enumerations and collection descriptions
# - identifiers: Record ids, application ids, UTC timestamps
# - security: Password hashing and access tokens
# - storage: Pluggable storage backends (MongoDB, in-memory)
