"""Jinja2 templates for the documentation renderers.

Both templates consume a DocView (see clidoc.view). The narrative template
is also the intermediate form for man pages: with a section number it
starts with a "% name section" title block.
"""

MARKDOWN_DOC_TEMPLATE = """\
{% if section > 0 %}% {{ name }} {{ section }}

{% endif %}# NAME

{{ name }}{% if usage %} - {{ usage }}{% endif %}

# SYNOPSIS

{{ name }}
{% if synopsis_args %}
```
{% for arg in synopsis_args %}{{ arg }}
{% endfor %}```
{% endif %}{% if description %}
# DESCRIPTION

{{ description }}
{% endif %}
**Usage**:

{% if usage_text %}{{ usage_text }}{% else %}```
{{ app_path }} [GLOBAL OPTIONS]{% if commands %} [command [COMMAND OPTIONS]]{% endif %} [ARGUMENTS...]
```
{% endif %}{% if flags %}
# GLOBAL OPTIONS
{% for group in flag_groups %}{% if group.category %}
**{{ group.category }}**
{% endif %}{% for flag in group.flags %}
{{ flag.display }}
{% endfor %}{% endfor %}{% endif %}{% if commands %}
# COMMANDS
{% for command in all_commands %}
{{ "#" * ([command.level + 2, 6] | min) }} {{ command.names | join(", ") }}

{{ command.usage_block }}{{ command.usage_text }}\
{% for group in command.flag_groups %}{% if group.category %}
**{{ group.category }}**
{% endif %}{% for flag in group.flags %}
{{ flag.display }}
{% endfor %}{% endfor %}{% endfor %}{% endif %}{% if authors %}
# AUTHORS
{% for author in authors %}
- {{ author }}{% endfor %}
{% endif %}{% if copyright %}
# COPYRIGHT

{{ copyright }}
{% endif %}"""

MARKDOWN_TABULAR_DOC_TEMPLATE = """\
{% macro flags_table(groups) -%}
{% for group in groups %}
{% if group.category %}**{{ group.category }}**
{% endif %}
| Name | Description | Default value | Environment variables |
|------|-------------|:-------------:|:---------------------:|
{% for flag in group.flags -%}
| {% for name in flag.names %}{% if not loop.first %}, {% endif %}`{{ name }}{% if flag.takes_value %}="…"{% endif %}`{% endfor %} \
| {{ flag.usage }} \
| {% if flag.default %}`{{ flag.default }}`{% endif %} \
| {% if flag.env_vars %}{% for env in flag.env_vars %}{% if not loop.first %}, {% endif %}`{{ env }}`{% endfor %}{% else %}*none*{% endif %} |
{% endfor %}
{% endfor %}
{%- endmacro %}

{% macro command_section(command, app_path) -%}
### `{{ command.full_name }}` {% if command.level > 0 %}sub{% endif %}command\
{% if command.aliases %} (aliases: `{{ command.aliases | join("`, `") }}`){% endif %}

{% if command.usage %}{{ command.usage }}.{% endif %}

{% for line in command.usage_text_lines %}> {{ line }}
{% endfor %}
{% if command.description %}{{ command.description }}.{% endif %}

Usage:

```bash
$ {{ app_path }} [GLOBAL FLAGS] {{ command.full_name }}{% if command.flags %} [COMMAND FLAGS]{% endif %} \
{% if command.args_usage %}{{ command.args_usage }}{% else %}[ARGUMENTS...]{% endif %}
```

{% if command.flags %}The following flags are supported:
{{ flags_table(command.flag_groups) }}{% endif %}
{%- endmacro %}

## CLI interface - {{ app_path }}

{% if description %}{{ description | oneline }}.{% endif %}

{% if usage %}{{ usage | oneline }}.{% endif %}

{% for line in usage_text_lines %}> {{ line }}
{% endfor %}
Usage:

```bash
$ {{ app_path }}{% if flags %} [GLOBAL FLAGS]{% endif %}{% if commands %} [COMMAND] [COMMAND FLAGS]{% endif %} \
{% if args_usage %}{{ args_usage }}{% else %}[ARGUMENTS...]{% endif %}
```

{% if flags %}Global flags:
{{ flags_table(flag_groups) }}{% endif %}

{% for command in all_commands %}{{ command_section(command, app_path) }}

{% endfor %}
{% if authors %}### Authors

{% for author in authors %}- {{ author }}
{% endfor %}{% endif %}
"""

__all__ = ["MARKDOWN_DOC_TEMPLATE", "MARKDOWN_TABULAR_DOC_TEMPLATE"]
