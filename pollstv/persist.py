'''Serialization of evaluators and results to JSON-ready dictionaries.

Evaluators in Pollstv are configured by their constructor parameters only,
so storing such a parameter set is enough to store the evaluator. Classes
decorated with :func:`simple_serialization` gain a ``to_dict()`` method whose
output names the class and lists the parameters; :func:`from_dict` calls the
class with them again. Quota functions are stored by their import path.

Election results are serializable as well, but only one way: they are
a record of a count, not something to count again.
'''

import sys
import inspect
import builtins
import importlib
from typing import Any, List, Dict


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names, so the class must store its
    parameters under the same names in a form its constructor accepts.

    :param class_: The class to add the method to.
    '''
    param_names = [
        name for name in inspect.signature(class_.__init__).parameters
        if name != 'self'
    ]

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, tuple(SEQUENCE_TYPES)):
        # Ballots are tuples; keep them tuples across a round trip.
        return {
            'type': type(value).__name__,
            'value': [serialize_value(item) for item in value],
        }
    elif isinstance(value, dict):
        if all(isinstance(key, str) for key in value.keys()):
            return {key: serialize_value(val) for key, val in value.items()}
        else:
            return {
                'type': 'dict',
                'keys': [serialize_value(key) for key in value.keys()],
                'values': [serialize_value(val) for val in value.values()]
            }
    elif hasattr(value, '__iter__'):
        return [serialize_value(item) for item in value]
    elif callable(value):
        return {'callable': '.'.join((value.__module__, value.__name__))}
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if is_scoped_identifier(value.get('type')):
            return deserialize_typed(value)
        elif is_scoped_identifier(value.get('class')):
            params = {
                key: deserialize_value(val)
                for key, val in value.items() if key != 'class'
            }
            return get_object(value['class'])(**params)
        elif is_scoped_identifier(value.get('callable')):
            return get_object(value['callable'])
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, list):
        return [deserialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def deserialize_typed(typedef: Dict[str, Any]) -> Any:
    typeobj = get_object(typedef['type'])
    if typeobj is dict:
        return dict(zip(
            [deserialize_value(key) for key in typedef['keys']],
            [deserialize_value(val) for val in typedef['values']]
        ))
    elif typeobj in SEQUENCE_TYPES and 'value' in typedef:
        return typeobj(deserialize_value(item) for item in typedef['value'])
    else:
        raise ValueError(f'invalid typed value contents: {typedef!r}')


def get_object(identifier: str) -> Any:
    '''Import an object by its dotted path; plain names are builtins.'''
    if '.' not in identifier:
        return getattr(builtins, identifier)
    module, name = identifier.rsplit('.', 1)
    if module not in sys.modules:
        importlib.import_module(module)
    return getattr(sys.modules[module], name)


def from_dict(value: Dict[str, Any]) -> Any:
    """Restore an evaluator object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid pollstv object def: dict expected,'
                         f' got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid pollstv object def: must have a class key')
    elif not is_scoped_identifier(value['class']):
        raise ValueError(f"invalid pollstv class def: {value['class']}")
    else:
        return deserialize_value(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize an evaluator or a result object to a JSON-ready dictionary.

    :param obj: An object providing a `to_dict()` method, such as the
        :class:`pollstv.evaluate.TransferableVoteSelector` or
        :class:`pollstv.election.ElectionResults`.
    """
    return serialize_value(obj)


def is_scoped_identifier(value: Any) -> bool:
    return (
        isinstance(value, str)
        and not value.startswith('.')
        and all(chunk.isidentifier() for chunk in value.split('.'))
    )


def scoped_class_name(value: Any) -> str:
    cls = value.__class__
    return '.'.join((cls.__module__, cls.__name__))


ATOMIC_TYPES: List[type] = [str, int, float, bool, type(None)]

SEQUENCE_TYPES: List[type] = [tuple, frozenset]
