"""
Test Suite for Beercan Bot.

Structure:
    tests/
    ├── conftest.py          # Shared fixtures and configuration
    ├── unit/                # Pure logic tests
    │   ├── test_classifier.py
    │   ├── test_window.py
    │   ├── test_models.py
    │   ├── test_greeting.py
    │   ├── test_telegram_api.py
    │   └── test_settings.py
    └── real/                # Component behaviour with Telegram mocked
        ├── test_delete_monitor_real.py
        ├── test_dispatcher_real.py
        ├── test_greeting_real.py
        └── test_bot_orchestration_real.py

Run tests:
    pytest tests/                    # All tests
    pytest tests/unit/               # Unit tests only
    pytest tests/real/               # Real functionality tests only
    pytest tests/ -m real            # Tests marked @pytest.mark.real
"""
