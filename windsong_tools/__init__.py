# windsong_tools/__init__.py
