# storefront/services
# Business logic behind the route modules. Every service branches on the
# database state injected for the request: live ORM queries when Available,
# the static fallback catalog when Unavailable.
