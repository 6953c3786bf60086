"""
Unit tests for the field registry and options.
"""

import time

import pytest

from structwriter import (
    ConfigError,
    FieldRegistry,
    ReservedFieldError,
    callsite_provider,
    option_from_name,
    timestamp_provider,
    with_field_func,
)


class TestFieldRegistry:
    """Test FieldRegistry"""

    def test_register_and_replace(self):
        """Should replace an existing provider with the same name"""
        registry = FieldRegistry()
        first = lambda data: 1
        second = lambda data: 2

        registry.register('n', first)
        registry.register('n', second)

        assert len(registry) == 1
        assert registry.view()['n'] is second

    def test_keeps_registration_order(self):
        """Should iterate fields in the order they were first registered"""
        registry = FieldRegistry()
        for name in ['b', 'a', 'c']:
            registry.register(name, lambda data: None)

        assert [name for name, _ in registry.items()] == ['b', 'a', 'c']

    def test_message_is_reserved(self):
        """Should reject the reserved message key"""
        registry = FieldRegistry()

        with pytest.raises(ReservedFieldError):
            registry.register('message', lambda data: 'shadow')

        assert 'message' not in registry

    def test_rejects_empty_name(self):
        """Should reject empty or non-string names"""
        registry = FieldRegistry()

        with pytest.raises(ConfigError):
            registry.register('', lambda data: 1)
        with pytest.raises(ConfigError):
            registry.register(None, lambda data: 1)

    def test_rejects_non_callable(self):
        """Should reject providers that cannot be called"""
        with pytest.raises(ConfigError, match='not callable'):
            FieldRegistry().register('n', 42)

    def test_frozen_registry(self):
        """Should refuse registration after freeze()"""
        registry = FieldRegistry()
        registry.register('n', lambda data: 1)
        registry.freeze()

        assert registry.frozen
        with pytest.raises(ConfigError, match='frozen'):
            registry.register('m', lambda data: 2)


class TestOptions:
    """Test option constructors"""

    def test_with_field_func_rejects_message(self):
        """Should fail when the option is created, not on first write"""
        with pytest.raises(ReservedFieldError):
            with_field_func('message', lambda data: 'x')

    def test_with_field_func_rejects_non_callable(self):
        with pytest.raises(ConfigError):
            with_field_func('n', 'not a function')

    def test_option_registers_field(self):
        """Should register the provider when applied"""
        provider = lambda data: len(data)
        registry = FieldRegistry()

        with_field_func('size', provider)(registry)

        assert registry.view()['size'] is provider

    def test_option_from_name(self):
        """Should map built-in names to their providers"""
        registry = FieldRegistry()
        option_from_name('timestamp')(registry)
        option_from_name('callsite')(registry)

        assert registry.view()['timestamp'] is timestamp_provider
        assert registry.view()['callsite'] is callsite_provider

    def test_option_from_unknown_name(self):
        with pytest.raises(ConfigError, match="Must be one of \\['callsite', 'timestamp'\\]"):
            option_from_name('pid')


class TestBuiltinProviders:
    """Test built-in providers called directly"""

    def test_timestamp_ignores_data(self):
        """Should return the current time regardless of input"""
        before = time.time_ns()
        ts = timestamp_provider(b'anything')
        after = time.time_ns()

        assert before <= ts <= after

    def test_callsite_direct_call(self):
        """Should report this file when called from a test"""
        filename, _, line = callsite_provider(b'').rpartition(':')

        assert filename == 'test_fields.py'
        assert int(line) > 0
