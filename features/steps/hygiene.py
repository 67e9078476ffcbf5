from textwrap import dedent

from behave import given, then, when

from features.steps.hygiene_env import HygieneContext

CLEAN_FEATURE = """\
{tags}
Feature: {name}
  Scenario: {name} works
    Given a registered customer
    When the customer opens {name}
    Then the {name} page is shown
"""


@given("a new project")
def step_new_project(context: HygieneContext):
    context.hygiene.add_config("")


@given('the feature file "{rel_path}"')
def step_feature_file(context: HygieneContext, rel_path: str):
    context.hygiene.project_files[rel_path] = dedent(context.text).strip() + "\n"


@given('the clean feature file "{rel_path}" tagged "{tags}"')
def step_clean_feature_file(context: HygieneContext, rel_path: str, tags: str):
    name = rel_path.rsplit("/", 1)[-1].split(".")[0]
    context.hygiene.project_files[rel_path] = CLEAN_FEATURE.format(tags=tags, name=name)


@given("the configuration")
def step_configuration(context: HygieneContext):
    context.hygiene.add_config(context.text)


@given('the configuration file "{rel_path}"')
def step_configuration_file(context: HygieneContext, rel_path: str):
    context.hygiene.project_files[rel_path] = context.text


@given("the warning {kind} is disabled")
def step_warning_is_disabled(context: HygieneContext, kind: str):
    context.hygiene.add_config(
        dedent(
            f"""
            [tool.gherkin-hygiene.warnings.{kind}]
            enabled = false
            """
        )
    )


@when('I run gherkin-hygiene with "{args}"')
def step_run_hygiene(context: HygieneContext, args: str):
    context.result = context.hygiene.run(*args.split())


@when("I run gherkin-hygiene with no arguments")
def step_run_hygiene_no_args(context: HygieneContext):
    context.result = context.hygiene.run()


@then("the exit code is {exit_code}")
def step_exit_code(context: HygieneContext, exit_code: str):
    assert context.result
    assert context.result.exit_code == int(exit_code), context.result.output


@then("the output contains the text")
def step_output_contains_text(context: HygieneContext):
    assert context.result
    assert context.text.strip() in context.result.output, context.result.output


@then('the output contains "{message}"')
def step_output_contains_message(context: HygieneContext, message: str):
    assert context.result
    assert message in context.result.output, context.result.output


@then('the output does not contain "{message}"')
def step_output_does_not_contain_message(context: HygieneContext, message: str):
    assert context.result
    assert message not in context.result.output, context.result.output
