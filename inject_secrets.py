"""
Build step: bake deployment secrets into nutri_ai/config.py.

Reads NUTRI_AI_API_KEY and NUTRI_AI_PIN from the build environment (CI secrets)
and replaces the placeholders. Secret values are never printed.

    NUTRI_AI_API_KEY=... NUTRI_AI_PIN=1234 python inject_secrets.py
"""
import os
import sys

CONFIG_PATH = os.path.join("nutri_ai", "config.py")

PLACEHOLDERS = {
    "NUTRI_AI_API_KEY": "__NUTRI_AI_API_KEY__",
    "NUTRI_AI_PIN": "__NUTRI_AI_PIN__",
}


def inject(path, secrets):
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()

    replaced = []
    for name, placeholder in PLACEHOLDERS.items():
        # swap the whole quoted literal so quotes/backslashes stay escaped
        literal = f'"{placeholder}"'
        if literal in source:
            source = source.replace(literal, repr(secrets[name]))
            replaced.append(name)

    with open(path, "w", encoding="utf-8") as f:
        f.write(source)
    return replaced


def main(environ=None, path=CONFIG_PATH):
    environ = os.environ if environ is None else environ
    secrets = {name: environ.get(name, "") for name in PLACEHOLDERS}

    missing = [name for name, value in secrets.items() if not value]
    if missing:
        print(f"❌ ERROR: missing build secrets: {', '.join(missing)}")
        return 1

    pin = secrets["NUTRI_AI_PIN"]
    if len(pin) != 4 or not pin.isdigit():
        print("❌ ERROR: NUTRI_AI_PIN must be exactly 4 digits")
        return 1

    if not os.path.exists(path):
        print(f"❌ ERROR: config file not found: {path}")
        return 1

    replaced = inject(path, secrets)
    if not replaced:
        print(f"⚠️ No placeholders left in {path}, nothing to do")
        return 0

    print(f"✔ Injected {', '.join(replaced)} into {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
