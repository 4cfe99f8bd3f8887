# services/__init__.py
# Бизнес-логика судейства: назначения, рецензии, подсчет результатов
