# This file marks the API package: application factory, config, routers, schemas, and services.
