"""
Tests for the Team-of-Experts workflow
"""

from conftest import ScriptedBackend

from src.agents.experts import COLLABORATION_ERROR, PLANNING_PLACEHOLDER, ExpertTeam
from src.agents.experts.prompts import agent_system_instruction, render_prior_outputs
from src.models.domain import AgentRole, AgentTask, RunStatus
from src.utils.errors import BackendError


def plan(*roles, text="Research, then write it up"):
    return {
        "plan": text,
        "tasks": [{"role": role.value, "task": f"{role.value} task"} for role in roles],
    }


async def collect(team, query):
    return [snapshot async for snapshot in team.stream(query)]


class TestPrompts:

    def test_prior_outputs_in_order(self):
        done = [
            AgentTask(role=AgentRole.RESEARCHER, instruction="a", output="facts", is_complete=True),
            AgentTask(role=AgentRole.CODER, instruction="b", output="code", is_complete=True),
        ]
        assert render_prior_outputs(done) == "- Researcher's output: facts\n- Coder's output: code"

    def test_first_agent_has_no_context(self):
        task = AgentTask(role=AgentRole.RESEARCHER, instruction="Find sources")
        instruction = agent_system_instruction(task, [])
        assert 'Your current task is: "Find sources".' in instruction
        assert "(no previous agents yet)" in instruction


class TestSuccessfulRun:

    async def test_context_is_chained(self):
        backend = ScriptedBackend(
            plan(AgentRole.RESEARCHER, AgentRole.CODER, AgentRole.SYNTHESIZER),
            "research notes",
            "some code",
            "final answer",
        )
        final = await ExpertTeam(backend).run("build a weather app")

        assert final.status == RunStatus.DONE
        assert final.final_response == "final answer"
        assert all(task.is_complete for task in final.tasks)

        researcher, coder, synthesizer = backend.requests[1:]
        assert "(no previous agents yet)" in researcher.system_instruction
        assert "- Researcher's output: research notes" in coder.system_instruction
        assert synthesizer.system_instruction.index("research notes") < synthesizer.system_instruction.index("some code")
        assert 'Original user query for context: "build a weather app"' in synthesizer.history[0].text

    async def test_snapshots(self):
        backend = ScriptedBackend(plan(AgentRole.RESEARCHER, AgentRole.SYNTHESIZER), "notes", "answer")
        snapshots = await collect(ExpertTeam(backend), "q")

        statuses = [s.status for s in snapshots]
        assert statuses[-3:] == [RunStatus.EXECUTING, RunStatus.SYNTHESIZING, RunStatus.DONE]
        assert all(a != b for a, b in zip(snapshots, snapshots[1:]))

        completed = [len(s.completed_tasks()) for s in snapshots]
        assert completed == sorted(completed)

    async def test_first_snapshot_is_placeholder_plan(self):
        backend = ScriptedBackend(plan(AgentRole.SYNTHESIZER), "answer")
        snapshots = await collect(ExpertTeam(backend), "q")
        assert snapshots[0].status == RunStatus.PLANNING
        assert snapshots[0].plan == PLANNING_PLACEHOLDER
        assert snapshots[0].tasks == ()

    async def test_first_synthesizer_output_wins(self):
        backend = ScriptedBackend(
            plan(AgentRole.SYNTHESIZER, AgentRole.DESIGNER, AgentRole.SYNTHESIZER),
            "first synthesis",
            "design",
            "second synthesis",
        )
        final = await ExpertTeam(backend).run("q")
        assert final.final_response == "first synthesis"

    async def test_falls_back_to_last_output(self):
        backend = ScriptedBackend(plan(AgentRole.RESEARCHER, AgentRole.DESIGNER), "notes", "mockups")
        final = await ExpertTeam(backend).run("q")

        assert final.status == RunStatus.DONE
        assert final.final_response == "mockups"


class TestFailures:

    async def test_task_failure_keeps_completed_outputs(self):
        backend = ScriptedBackend(
            plan(AgentRole.RESEARCHER, AgentRole.CODER, AgentRole.SYNTHESIZER),
            "notes",
            BackendError("rate limited"),
        )
        final = await ExpertTeam(backend).run("q")

        assert final.status == RunStatus.FAILED
        assert final.final_response == COLLABORATION_ERROR.format(error="rate limited")
        assert final.tasks[0].is_complete and final.tasks[0].output == "notes"
        assert not final.tasks[1].is_complete
        assert not final.tasks[2].is_complete
        # the synthesizer is never called
        assert len(backend.requests) == 3

    async def test_malformed_plan(self):
        backend = ScriptedBackend("I will research first, then code.")
        final = await ExpertTeam(backend).run("q")

        assert final.status == RunStatus.FAILED
        assert final.final_response.startswith("An error occurred during the collaboration:")
        assert final.tasks == ()

    async def test_empty_plan(self):
        backend = ScriptedBackend({"plan": "nothing", "tasks": []})
        final = await ExpertTeam(backend).run("q")
        assert final.status == RunStatus.FAILED
        assert "no tasks" in final.final_response

    async def test_plan_over_task_limit(self):
        backend = ScriptedBackend(plan(*([AgentRole.RESEARCHER] * 4)))
        final = await ExpertTeam(backend, max_tasks=3).run("q")

        assert final.status == RunStatus.FAILED
        assert "limit is 3" in final.final_response
        assert len(backend.requests) == 1

    async def test_unknown_role_fails_planning(self):
        backend = ScriptedBackend({"plan": "p", "tasks": [{"role": "Astronaut", "task": "fly"}]})
        final = await ExpertTeam(backend).run("q")
        assert final.status == RunStatus.FAILED
