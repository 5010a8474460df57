# Vulture whitelist file
# This file contains false positives that vulture incorrectly flags as dead code.
# These are typically framework-registered functions, Pydantic fields, pytest fixtures, etc.
#
# Usage: python3 -m vulture server vulture_whitelist.py

# =============================================================================
# FastAPI Route Handlers (registered via @router.get/post decorators)
# =============================================================================
# These functions are called by FastAPI when matching HTTP requests arrive.
# Vulture cannot see this because the registration happens via decorators.

health_check  # routes.py - GET /healthz
readiness_check  # routes.py - GET /readyz
list_nodes  # routes.py - GET /api/v1/nodes
get_node  # routes.py - GET /api/v1/nodes/{node_id}
get_node_ip_address  # routes.py - GET /api/v1/nodes/{node_id}/ipaddress
set_node_ip_address  # routes.py - PUT /api/v1/nodes/{node_id}/ipaddress
discover_node_hardware  # routes.py - POST /api/v1/nodes/{node_id}/discover

# =============================================================================
# FastAPI Middleware (registered via @app.middleware decorator)
# =============================================================================
audit_middleware  # main.py - request audit logging

# =============================================================================
# Pydantic Model Fields (accessed via JSON serialization/deserialization)
# =============================================================================
# These are schema fields that API clients read via JSON.
# Vulture sees them as unused class variables.

_.total_count  # NodesResponse
_.timestamp  # HealthResponse
_.version  # HealthResponse

# =============================================================================
# Pydantic model_config (ConfigDict for Pydantic v2 configuration)
# =============================================================================
model_config  # models.py - frozen inventory models

# =============================================================================
# Pydantic Config class attributes
# =============================================================================
env_file  # config.py - Settings.Config
case_sensitive  # config.py - Settings.Config

# =============================================================================
# Pytest Fixtures (discovered by pytest at runtime by name)
# =============================================================================
reset_global_store  # conftest.py - autouse fixture
restore_config_validation  # test_config_validation.py - autouse fixture

# =============================================================================
# Public API Methods (may be used externally or for future features)
# =============================================================================
save_node_config  # encoder_service.py - writes a complete NodeConfig for tooling and tests
_.close  # store_service.py - releases the etcd HTTP client
