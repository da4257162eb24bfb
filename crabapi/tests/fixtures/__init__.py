"""Test fixtures for crabapi tests.

This module provides sample API descriptions used across the test suite.
"""

import copy
import json
from pathlib import Path

# Minimal description with nothing to generate
MINIMAL_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

# A single route outside the admin prefix, with a path and a query parameter
WIDGETS_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Widgets', 'version': '2.1.0'},
    'paths': {
        '/realm/{id}/widgets': {
            'get': {
                'summary': 'List widgets',
                'parameters': [
                    {
                        'name': 'id',
                        'in': 'path',
                        'required': True,
                        'schema': {'type': 'string'},
                    },
                    {
                        'name': 'name',
                        'in': 'query',
                        'description': 'Filter by name',
                        'schema': {'type': 'string'},
                    },
                ],
                'responses': {
                    '200': {
                        'description': 'success',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Widget'},
                                }
                            }
                        },
                    }
                },
            }
        }
    },
    'components': {
        'schemas': {
            'Widget': {
                'type': 'object',
                'properties': {
                    'id': {'type': 'string'},
                    'name': {'type': 'string'},
                },
            }
        }
    },
}

# Struct whose members split 1:1 between camelCase and snake_case
TIE_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Tie', 'version': '1.0.0'},
    'paths': {},
    'components': {
        'schemas': {
            'Pair': {
                'type': 'object',
                'properties': {
                    'fooBar': {'type': 'string'},
                    'foo_bar': {'type': 'string'},
                },
            }
        }
    },
}

_USER_REF = {'$ref': '#/components/schemas/UserRepresentation'}

# Keycloak-like admin description with tags, realm scoped routes and schemas
REALM_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Keycloak Admin REST API', 'version': '26.0.0'},
    'tags': [{'name': 'Users'}, {'name': 'Client Scopes'}],
    'paths': {
        '/admin/realms': {
            'get': {
                'summary': 'Get accessible realms',
                'responses': {
                    '200': {
                        'description': 'success',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {
                                        '$ref': '#/components/schemas/RealmRepresentation'
                                    },
                                }
                            }
                        },
                    }
                },
            }
        },
        '/admin/realms/{realm}/users': {
            'parameters': [
                {
                    'name': 'realm',
                    'in': 'path',
                    'description': 'realm name (not id!)',
                    'required': True,
                    'schema': {'type': 'string'},
                }
            ],
            'get': {
                'tags': ['Users'],
                'summary': 'Get users',
                'description': 'Returns a stream of users, filtered according to query parameters.',
                'parameters': [
                    {
                        'name': 'briefRepresentation',
                        'in': 'query',
                        'description': 'Boolean which defines whether brief representations are returned',
                        'schema': {'type': 'boolean'},
                    },
                    {
                        'name': 'first',
                        'in': 'query',
                        'description': 'Pagination offset',
                        'schema': {'type': 'integer', 'format': 'int32'},
                    },
                    {
                        'name': 'max',
                        'in': 'query',
                        'description': 'Maximum results size',
                        'schema': {'type': 'integer', 'format': 'int32'},
                    },
                    {'name': 'search', 'in': 'query', 'schema': {'type': 'string'}},
                ],
                'responses': {
                    '200': {
                        'description': 'success',
                        'content': {
                            'application/json': {
                                'schema': {'type': 'array', 'items': _USER_REF}
                            }
                        },
                    }
                },
            },
            'post': {
                'tags': ['Users'],
                'summary': 'Create a new user',
                'requestBody': {
                    'content': {'application/json': {'schema': _USER_REF}},
                    'required': True,
                },
                'responses': {'201': {'description': 'Created'}},
            },
        },
        '/admin/realms/{realm}/users/{user-id}': {
            'parameters': [
                {
                    'name': 'realm',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'string'},
                },
                {
                    'name': 'user-id',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'string'},
                },
            ],
            'get': {
                'tags': ['Users'],
                'summary': 'Get representation of the user',
                'responses': {
                    '200': {
                        'description': 'success',
                        'content': {'application/json': {'schema': _USER_REF}},
                    }
                },
            },
            'put': {
                'tags': ['Users'],
                'summary': 'Update the user',
                'requestBody': {
                    'content': {'application/json': {'schema': _USER_REF}},
                    'required': True,
                },
                'responses': {'204': {'description': 'No Content'}},
            },
            'delete': {
                'tags': ['Users'],
                'summary': 'Delete the user',
                'responses': {'204': {'description': 'No Content'}},
            },
        },
        '/admin/realms/{realm}/client-scopes': {
            'parameters': [
                {
                    'name': 'realm',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'string'},
                }
            ],
            'get': {
                'tags': ['Client Scopes'],
                'summary': 'Get client scopes belonging to the realm',
                'responses': {
                    '200': {
                        'description': 'success',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {
                                        '$ref': '#/components/schemas/ClientScopeRepresentation'
                                    },
                                }
                            }
                        },
                    }
                },
            },
        },
        '/admin/realms/{realm}/mixed': {
            'get': {'tags': ['Users'], 'responses': {'204': {'description': 'none'}}},
            'post': {
                'tags': ['Client Scopes'],
                'responses': {'204': {'description': 'none'}},
            },
        },
        '/admin/realms/{realm}/attack-detection/brute-force/users': {
            'parameters': [
                {
                    'name': 'realm',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'string'},
                }
            ],
            'delete': {
                'summary': 'Clear any user login failures for all users',
                'responses': {'204': {'description': 'No Content'}},
            },
        },
    },
    'components': {
        'schemas': {
            'UserRepresentation': {
                'type': 'object',
                'properties': {
                    'username': {'type': 'string'},
                    'id': {'type': 'string'},
                    'enabled': {'type': 'boolean'},
                    'createdTimestamp': {'type': 'integer', 'format': 'int64'},
                    'attributes': {
                        'type': 'object',
                        'additionalProperties': {
                            'type': 'array',
                            'items': {'type': 'string'},
                        },
                    },
                    'origin': {'type': 'string', 'deprecated': True},
                },
            },
            'RealmRepresentation': {
                'type': 'object',
                'properties': {
                    'realm': {'type': 'string'},
                    'displayName': {'type': 'string'},
                },
            },
            'ClientScopeRepresentation': {
                'type': 'object',
                'properties': {
                    'id': {'type': 'string'},
                    'name': {'type': 'string'},
                    'protocol': {'type': 'string'},
                },
            },
            'DecisionStrategy': {
                'type': 'string',
                'enum': ['AFFIRMATIVE', 'UNANIMOUS', 'CONSENSUS'],
            },
            'MultivaluedHashMapStringString': {
                'type': 'object',
                'additionalProperties': {'type': 'array', 'items': {'type': 'string'}},
            },
            'Coordinates': {
                'type': 'object',
                'properties': {
                    'latitude': {'type': 'number', 'format': 'double'},
                    'longitude': {'type': 'number', 'format': 'double'},
                },
            },
            'Place': {
                'type': 'object',
                'properties': {
                    'name': {'type': 'string'},
                    'position': {'$ref': '#/components/schemas/Coordinates'},
                },
            },
        }
    },
}


def clone(spec: dict) -> dict:
    """Deep copy of a fixture that a test may modify."""
    return copy.deepcopy(spec)


def write_spec(directory: Path, spec: dict, name: str = 'openapi.json') -> Path:
    """Write a fixture description to ``directory`` and return its path."""
    path = directory / name
    path.write_text(json.dumps(spec), encoding='utf-8')
    return path
