"""LangGraph orchestration of a single conversation turn."""

import asyncio
from typing import Any, Optional

from langgraph.graph import END, StateGraph

from binbot.intent import IntentInterpreter
from binbot.models import Container, PendingScan
from binbot.state import TurnState
from binbot.tools.executor import ActionExecutor


class TurnGraph:
    """Runs interpret -> execute for one user command."""

    def __init__(
        self,
        interpreter: IntentInterpreter,
        executor: ActionExecutor,
    ):
        """Initialize the graph.

        Args:
            interpreter: Turns commands into actions
            executor: Applies actions to the store
        """
        self.interpreter = interpreter
        self.executor = executor
        self.workflow = self.build_graph()

    def build_graph(self) -> Any:
        """Build the LangGraph workflow.

        Returns:
            Compiled StateGraph
        """
        workflow = StateGraph(TurnState)

        workflow.add_node("interpret", self.interpret_node)
        workflow.add_node("execute", self.execute_node)

        workflow.set_entry_point("interpret")
        workflow.add_edge("interpret", "execute")
        workflow.add_edge("execute", END)

        return workflow.compile()

    async def run(
        self,
        command: str,
        containers: list[Container],
        pending_scan: Optional[PendingScan] = None,
    ) -> TurnState:
        """Run one turn and return the final state."""
        initial: TurnState = {
            "command": command,
            "containers": containers,
            "pending_scan": pending_scan,
            "action": None,
            "response": "",
        }
        return await self.workflow.ainvoke(initial)

    async def interpret_node(self, state: TurnState) -> dict:
        # The LLM call blocks, so it runs off the event loop
        action = await asyncio.to_thread(
            self.interpreter.interpret,
            state["command"],
            state["containers"],
            state["pending_scan"],
        )
        return {"action": action}

    async def execute_node(self, state: TurnState) -> dict:
        action = state["action"]
        response = self.executor.execute(action)
        return {"response": response}
