"""gh-switch: switch between multiple GitHub identities on one machine.

Keeps named profiles (git name/email, GitHub username, SSH key) in
~/.gh-switch/config.json and one SSH host alias per profile in a
marker-delimited region of ~/.ssh/config.
"""

__version__ = "1.0.0"
