"""Tests for the drag-and-drop evaluator."""

import pytest


CORRECT = {"item1": "t1", "item2": "t2"}


class TestDragDropScoring:
    """Test all-or-nothing placement scoring."""

    def test_all_placements_correct(self, dispatcher, drag_drop_data):
        """Test that every item on its target earns full marks."""
        result = dispatcher.evaluate("drag-drop", drag_drop_data, CORRECT, 6)
        assert result.is_correct is True
        assert result.points_earned == 6

    @pytest.mark.parametrize("item", ["item1", "item2"])
    def test_one_wrong_placement_drops_to_zero(self, dispatcher, drag_drop_data, item):
        """Test that changing any single correct placement scores zero."""
        answer = dict(CORRECT)
        answer[item] = "t1" if CORRECT[item] == "t2" else "t2"
        result = dispatcher.evaluate("drag-drop", drag_drop_data, answer, 6)
        assert result.is_correct is False
        assert result.points_earned == 0

    def test_missing_placement_is_incorrect(self, dispatcher, drag_drop_data):
        """Test that leaving an item unplaced fails the question."""
        result = dispatcher.evaluate("drag-drop", drag_drop_data, {"item1": "t1"}, 6)
        assert result.points_earned == 0
        placement = result.formatted_answer.drag_drop_results["item2"]
        assert placement.assigned_target is None
        assert placement.correct_target == "t2"
        assert placement.is_correct is False

    def test_alias_tag(self, dispatcher, drag_drop_data):
        """Test that 'drag-and-drop' is the same type."""
        result = dispatcher.evaluate("drag-and-drop", drag_drop_data, CORRECT, 6)
        assert result.is_correct is True
        assert result.formatted_answer.question_type == "drag-drop"

    def test_prefixed_target_ids(self, dispatcher, drag_drop_data):
        """Test that 'target-<id>' values are read as the bare target id."""
        answer = {"item1": "target-t1", "item2": "target-t2"}
        assert dispatcher.evaluate("drag-drop", drag_drop_data, answer, 6).is_correct

    def test_explicit_mappings_take_precedence(self, dispatcher, drag_drop_data):
        """Test that a non-empty correctMappings object wins over the targets."""
        drag_drop_data["correctMappings"] = {"item1": "t2", "item2": "t1"}
        swapped = {"item1": "t2", "item2": "t1"}
        assert dispatcher.evaluate("drag-drop", drag_drop_data, swapped, 6).is_correct
        assert not dispatcher.evaluate("drag-drop", drag_drop_data, CORRECT, 6).is_correct

    def test_mappings_given_as_target_list(self, dispatcher):
        """Test that correctMappings may hold the target list itself."""
        data = {"correctMappings": [{"id": "t9", "correctItemId": "x"}]}
        assert dispatcher.evaluate("drag-drop", data, {"x": "t9"}, 1).is_correct

    def test_non_mapping_answer_is_incorrect(self, dispatcher, drag_drop_data):
        """Test that a list answer counts as no placements."""
        result = dispatcher.evaluate("drag-drop", drag_drop_data, ["item1", "item2"], 6)
        assert result.ok
        assert result.points_earned == 0

    def test_extra_placements_are_ignored(self, dispatcher, drag_drop_data):
        """Test that placements for unknown items do not matter."""
        answer = dict(CORRECT, distractor="t1")
        assert dispatcher.evaluate("drag-drop", drag_drop_data, answer, 6).is_correct

    def test_no_mappings_scores_zero(self, dispatcher):
        """Test that a question without any correct mapping scores zero."""
        result = dispatcher.evaluate("drag-drop", {"dragDropTargets": []}, {"a": "b"}, 3)
        assert result.ok
        assert result.points_earned == 0
        assert result.formatted_answer.correct_answers == {}

    def test_record_serialization(self, dispatcher, drag_drop_data):
        """Test camelCase keys of the stored placement results."""
        record = dispatcher.evaluate("drag-drop", drag_drop_data, CORRECT, 6).to_dict()["formattedAnswer"]
        assert record["correctAnswers"] == CORRECT
        assert record["dragDropResults"]["item1"] == {
            "assignedTarget": "t1",
            "correctTarget": "t1",
            "isCorrect": True,
        }


class TestDragDropDefinitionErrors:
    """Test malformed drag-and-drop definitions."""

    def test_target_without_id_falls_back(self, dispatcher):
        """Test that a target with no id makes the definition invalid."""
        data = {"dragDropTargets": [{"correctItemId": "item1"}]}
        result = dispatcher.evaluate("drag-drop", data, {"item1": "t1"}, 2)
        assert result.ok is False
        assert result.formatted_answer.evaluation_method == "fallback"
        assert "target 0" in result.formatted_answer.error

    def test_invalid_mappings_type_falls_back(self, dispatcher):
        """Test that correctMappings of the wrong type is rejected."""
        result = dispatcher.evaluate("drag-drop", {"correctMappings": "item1:t1"}, {}, 2)
        assert result.ok is False
        assert result.points_earned == 0
