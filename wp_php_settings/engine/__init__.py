"""Settings-to-config-file synchronization engine.

Modules:
- byte_size: PHP shorthand size strings to byte counts
- inspector: live directive values and access levels
- validator: advisory cross-checks on a settings map
- ini_file: render a settings map into INI text
- reconciler: write/remove the INI targets
- wp_config: patch define() constants in wp-config.php
- history: change history ledger
- extensions: loaded-extension inventory
- debug_log: debug.log viewer
"""
