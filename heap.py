from errors import QueueUnderflowError


### BINARY MAX-HEAP ###
class PriorityQueue:
    """
    Binary max-heap over (key, payload) entries.

    Only the key (first item) is compared, so payloads never need to be
    orderable. The Huffman builder stores negated weights as keys, which turns
    this max-heap into a min-weight-first queue.
    """

    def __init__(self):
        # Complete binary tree laid out in a list: children of i sit at 2i+1, 2i+2
        self.heap = []

    def __len__(self):
        return len(self.heap)

    def size(self):
        return len(self.heap)

    def is_empty(self):
        return not self.heap

    def peek(self):
        if not self.heap:
            raise QueueUnderflowError("peek from an empty priority queue")
        return self.heap[0]

    def insert(self, entry):
        """Add an entry and restore the heap property."""
        self.heap.append(entry)
        self._sift_up(len(self.heap) - 1)

    def extract_max(self):
        """Remove and return the entry with the largest key."""
        if not self.heap:
            raise QueueUnderflowError("extract from an empty priority queue")

        top = self.heap[0]
        last = self.heap.pop()
        if self.heap:
            # Move the last leaf into the root slot and push it back down
            self.heap[0] = last
            self._sift_down(0)
        return top

    def _sift_up(self, index):
        heap = self.heap
        while index > 0:
            parent = (index - 1) // 2
            if heap[parent][0] >= heap[index][0]:
                break
            heap[index], heap[parent] = heap[parent], heap[index]
            index = parent

    def _sift_down(self, index):
        heap = self.heap
        length = len(heap)
        while True:
            left = 2 * index + 1
            right = 2 * index + 2
            largest = index

            # Strict comparisons: on a tie the left child wins
            if left < length and heap[left][0] > heap[largest][0]:
                largest = left
            if right < length and heap[right][0] > heap[largest][0]:
                largest = right

            if largest == index:
                break
            heap[index], heap[largest] = heap[largest], heap[index]
            index = largest
